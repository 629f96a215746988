from django import forms

from .models import DailyReport, Student, Surah


class StudentForm(forms.ModelForm):
    class Meta:
        model = Student
        fields = [
            'full_name', 'guardian_name', 'phone1', 'phone2', 'birth_date',
            'registration_date', 'status', 'daily_memorization_amount', 'notes',
        ]
        widgets = {
            'birth_date': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
            'registration_date': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
            'notes': forms.Textarea(attrs={'rows': 3}),
        }


class StatusChangeForm(forms.Form):
    status = forms.ChoiceField(choices=Student.STATUS_CHOICES, label="الحالة")
    reason = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}), label="السبب")


class DailyReportForm(forms.ModelForm):
    class Meta:
        model = DailyReport
        fields = ['date', 'category', 'note', 'author_name', 'image']
        widgets = {
            'date': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
            'note': forms.Textarea(attrs={'rows': 4}),
        }

    def clean_note(self):
        note = (self.cleaned_data.get('note') or '').strip()
        if not note:
            raise forms.ValidationError("لا يمكن حفظ تقرير فارغ.")
        return note


class SurahChoiceForm(forms.Form):
    surah = forms.ModelChoiceField(queryset=Surah.objects.all(), label="السورة")


class VerseRangeForm(forms.Form):
    from_verse = forms.IntegerField(min_value=1, label="من آية")
    to_verse = forms.IntegerField(min_value=1, label="إلى آية")

    def clean(self):
        data = super().clean()
        f, t = data.get('from_verse'), data.get('to_verse')
        if f and t and f > t:
            raise forms.ValidationError("رقم آية البداية يجب أن يكون أقل من أو يساوي رقم آية النهاية.")
        return data


class SpreadsheetUploadForm(forms.Form):
    file = forms.FileField(label="ملف Excel")

    def clean_file(self):
        upload = self.cleaned_data['file']
        if not upload.name.lower().endswith('.xlsx'):
            raise forms.ValidationError("الملف يجب أن يكون بصيغة .xlsx")
        return upload
